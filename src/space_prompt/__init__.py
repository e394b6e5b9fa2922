"""
A fast, Git-aware, two-line zsh prompt

``space-prompt`` renders a spaceship-style command prompt for zsh (or Bash, or
a plain ANSI terminal).  Every piece of the prompt is produced by an
independent module, and all of the modules are run concurrently so that a
slow ``git status`` doesn't hold up the rest.

Features:

- Shows the current directory, or ``~`` when you're at home
- Shows the current Git branch along with a compact summary of untracked,
  staged, modified, renamed, deleted, stashed & unmerged changes and whether
  the branch is ahead of, behind, or diverged from its upstream
- Shows the active Kubernetes context
- Shows the Go toolchain version inside Go modules
- Shows how long the last command took, if it took two seconds or more
- Shows the exit status of the last command
- Marks SSH sessions and the root user

Run ``eval "$(space-prompt --init zsh)"`` in your ``~/.zshrc`` to install it.
"""

__version__ = "0.1.0"
__author__ = "The space-prompt Authors"
__license__ = "Apache-2.0"
__url__ = "https://github.com/space-prompt/space-prompt"
