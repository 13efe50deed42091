"""completers -- run external line-completion processes for interactive shells.

An interactive front-end (the *invoker*) hands its current line and cursor
to a short-lived *completion process* on a trigger keystroke, waits for it
to exit, and replaces its line and cursor with the process's answer.

Typical shell binding::

    completers complete --point="$READLINE_POINT" "$READLINE_LINE"
    # prints "<new point> <new line>" on success, nothing on failure

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models for line states, requests and configuration.
    protocol: Request encoding, result-record decoding, cursor splicing.
    channels: Result delivery over a stdout pipe or a temporary file.
    invoker: Running the completion process and updating the live line.
    process: Reference completion process (``completers-process``).
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting and logging setup with Rich.
"""

__version__ = "0.1.0"
