"""
Utilities Package for the Media Re-encoder.

Modules:
    - process_utils.py: Runs external commands with a timeout and turns every
      failure into a `CommandResult`; also fills command templates.
    - tool_paths.py: Locates ffmpeg, cjxl and djxl and verifies them at start-up.
    - format_utils.py: Formats sizes and durations for log messages.
"""
