"""Qt UI constants used across widgets."""

WINDOW_TITLE: str = "PracticeQt Exam Practice"
STATE_REFRESH_INTERVAL_MS: int = 500

LOGIN_DIALOG_TITLE: str = "Log in"
LOGIN_BUTTON: str = "Log in"
LOGOUT_BUTTON: str = "Log out"
REGISTER_DIALOG_TITLE: str = "Create account"
REGISTER_BUTTON: str = "Register"
SWITCH_TO_REGISTER: str = "No account yet? Register"
SWITCH_TO_LOGIN: str = "Already registered? Log in"

BROWSER_ALL_SKILLS: str = "All skills"
BROWSER_ALL_PARTS: str = "All parts"
BROWSER_REFRESH_BUTTON: str = "Refresh"
BROWSER_START_BUTTON: str = "Start Practice"
BROWSER_EMPTY_STATE: str = "No quizzes match the selected filters."
BROWSER_QUOTA_TEMPLATE: str = "Free attempts left: {remaining} of {limit}"
BROWSER_UNLIMITED: str = "Premium: unlimited attempts"
MAX_PART_NUMBER: int = 7

SESSION_PREV_BUTTON: str = "Previous"
SESSION_NEXT_BUTTON: str = "Next"
SESSION_SAVE_BUTTON: str = "Save Progress"
SESSION_SUBMIT_BUTTON: str = "Submit"
SESSION_LEAVE_BUTTON: str = "Leave Quiz"
SESSION_SUBMITTING_LABEL: str = "Submitting…"
SESSION_TEXT_PLACEHOLDER: str = "Type your answer here…"
SESSION_ESSAY_PLACEHOLDER: str = "Write your essay here…"
SESSION_PROGRESS_TEMPLATE: str = "Question {number} / {total} · {answered} answered"

RESULTS_SHOW_EXPLANATIONS: str = "Show Explanations"
RESULTS_HIDE_EXPLANATIONS: str = "Hide Explanations"
RESULTS_BACK_BUTTON: str = "Back to Quizzes"

UPGRADE_REQUIRED_MESSAGE: str = (
    "You have used all of your free attempts. Upgrade to a premium subscription to keep practicing."
)
TIME_UP_MESSAGE: str = "Time is up. Your answers were submitted automatically."
