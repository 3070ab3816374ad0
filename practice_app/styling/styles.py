"""Stylesheet builders for the practice window and its panels."""

from .color_palette import ColorPalette, Theme

class Styles:
    """Helper class to generate Qt stylesheets based on the current theme."""

    @staticmethod
    def get_main_window_style(theme: Theme = Theme.LIGHT) -> str:
        text = ColorPalette.TEXT_PRIMARY.get(theme)
        background = ColorPalette.BACKGROUND_PRIMARY.get(theme)
        border = ColorPalette.BORDER_PRIMARY.get(theme)
        accent = ColorPalette.BUTTON_PRIMARY_BG.get(theme)
        return f"""
            QMainWindow, QWidget {{
                background-color: {background};
                color: {text};
            }}
            QWidget {{
                font-family: 'Segoe UI', 'Roboto', sans-serif;
                font-size: 14px;
            }}
            QPushButton {{
                background-color: {ColorPalette.BUTTON_SECONDARY_BG.get(theme)};
                border: 1px solid {border};
                border-radius: 4px;
                padding: 6px 12px;
            }}
            QPushButton:hover {{
                background-color: {ColorPalette.BUTTON_HOVER_BG.get(theme)};
            }}
            QPushButton:disabled {{
                color: {ColorPalette.TEXT_DISABLED.get(theme)};
            }}
            QLineEdit, QPlainTextEdit, QSpinBox, QComboBox, QListWidget {{
                border: 1px solid {border};
                border-radius: 4px;
                padding: 4px;
            }}
            QRadioButton {{
                padding: 4px 0;
            }}
            QProgressBar {{
                border: none;
                background-color: {ColorPalette.BACKGROUND_TERTIARY.get(theme)};
                max-height: 6px;
            }}
            QProgressBar::chunk {{
                background-color: {accent};
            }}
        """

    @staticmethod
    def get_large_label_style() -> str:
        return "font-size: 16pt; font-weight: bold;"

    @staticmethod
    def get_progress_map_style(current: bool, answered: bool, theme: Theme = Theme.LIGHT) -> str:
        """Style for one numbered cell of the question progress map."""
        if current:
            background = ColorPalette.BUTTON_PRIMARY_BG.get(theme)
            color = ColorPalette.BUTTON_PRIMARY_TEXT.get(theme)
        elif answered:
            background = ColorPalette.ANSWERED_BG.get(theme)
            color = ColorPalette.SUCCESS.get(theme)
        else:
            background = ColorPalette.BACKGROUND_TERTIARY.get(theme)
            color = ColorPalette.TEXT_SECONDARY.get(theme)
        return f"background-color: {background}; color: {color}; border-radius: 16px; padding: 0; font-weight: bold;"

    @staticmethod
    def get_timer_label_style(urgent: bool, theme: Theme = Theme.LIGHT) -> str:
        base = "padding: 2px 6px; border-radius: 4px; font-size: 14pt; font-family: monospace;"
        if not urgent:
            return base
        return base + f" color: #fff; background-color: {ColorPalette.ERROR.get(theme)};"

    @staticmethod
    def get_score_label_style(score: float | None, theme: Theme = Theme.LIGHT) -> str:
        if score is None:
            color = ColorPalette.TEXT_SECONDARY.get(theme)
        elif score >= 80:
            color = ColorPalette.SUCCESS.get(theme)
        elif score >= 60:
            color = ColorPalette.WARNING.get(theme)
        else:
            color = ColorPalette.ERROR.get(theme)
        return f"font-size: 36pt; font-weight: bold; color: {color};"
