"""FlowBoard - a personal task board.

Tasks move through To Do, In Progress and Done columns, are archived a day
after completion, and can be backed up to JSON or Markdown.
"""

__version__ = "1.1.0"
