"""Defaults for the calculator session and command line"""

PROMPT = "> "
RESULT = "= "

# significant digits when printing results, matches C++ stream output
PRECISION = 6

# each group or unary sign costs one primary() level
MAX_DEPTH = 150

BANNER = (
    "\nWelcome to our simple calculator!\n"
    "\nPlease enter expressions using floating-point numbers.\n"
    "You can use +, -, *, /, %, ! (factorial), () and {}.\n"
    "End an expression with ; to see its value.\n"
    "For example: (2+3)*11;\n"
    "\nTo exit, please enter q.\n"
)

LOGGING_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOGGING_LEVEL = "WARNING"
