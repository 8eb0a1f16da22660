"""Core logic for Log Prettifier.

The Gradio viewer lives in `app.py`. This package contains pure functions that:
- pull a JSON or XML fragment out of noisy text
- detect its format and pretty-print it
- tokenize the result for syntax coloring
- search, highlight and navigate matches in the rendered text
"""
__version__ = "0.1.0"
