"""termrelay -- Chat terminal backend relaying commands to a language model.

A browser chat terminal posts commands to a single HTTP endpoint. Each
command is appended to a per-session transcript and sent to a
generative language model; replies that carry the shell sentinel are
executed on the host and their output returned instead of the text.
"""

__version__ = "0.1.0"
