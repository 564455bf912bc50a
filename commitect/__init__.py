"""
Commitect

Detects the intent of working-tree changes and suggests a commit message.
"""

__version__ = "1.0.0"

# Intent categories the classifier is known to return.
# Used by: output (coloring). Unknown categories are still displayed as-is.
INTENT_TYPES = {
    'Feature': 'A new feature or capability',
    'Bug Fix': 'A bug fix',
    'Refactor': 'Code restructuring without behavior change',
    'Documentation': 'Documentation only changes',
    'Test': 'Adding or updating tests',
    'Style': 'Formatting, whitespace, no code change',
    'Performance': 'Performance improvement',
    'Chore': 'Maintenance tasks, dependencies, tooling',
}

INTENT_TYPE_NAMES = list(INTENT_TYPES.keys())
