"""MemberScore plugin.

Upload, store and export member scores from the admin area of a host
framework, with the plugin wired into the host through a hook
registration table.
"""

__version__ = "1.4.0"

from .plugin import MemberScore, member_score
