"""Static metadata describing PracticeQt."""

APP_NAME = "PracticeQt"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "PracticeQt is a desktop client for language-proficiency exam practice. "
    "Browse quizzes by skill and part, take timed practice tests, and review "
    "your scored answers with explanations."
)

HELP_TEXT = (
    "Pick a quiz from the list and press Start Practice. Move between questions with "
    "Previous/Next or the numbered progress map; answered questions are shown in green. "
    "Save Progress stores your answers on the server without submitting. "
    "Timed quizzes are submitted automatically when the countdown reaches zero.\n\n"
    "Free accounts include a limited number of attempts; premium accounts are unlimited."
)
