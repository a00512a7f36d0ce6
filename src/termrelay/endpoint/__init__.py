"""HTTP endpoint module for termrelay.

Serves the command endpoint consumed by the browser chat terminal.
"""
