"""Built-in commands of the ``completers`` CLI.

Modules:
    complete: run one completion and print the result record.
    config: view and modify the global configuration.
"""
