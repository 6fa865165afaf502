# Mail link settings
DEFAULT_SUBJECT = "Email from SourceBrowser"
SEPARATOR = "-" * 80

# Blame settings
DEFAULT_REV = "HEAD"
DEFAULT_COPY_MOVE = 0
# Files in the repository root that are passed to git blame --ignore-revs-file
IGNORE_REVS_FILES = ["_git-blame-ignore-revs.txt", ".git-blame-ignore-revs"]

# Logging
DEFAULT_VERBOSITY = 0

# Context keys of the host renderer
FILE_PATH_KEY = "file_path"
LINE_NUMBER_KEY = "line_number"
DISPLAY_PATH_KEY = "display_path"
