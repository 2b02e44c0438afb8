"""
Custom Workspaces

Session helper for Sway/i3: fixes the workspace count, plays a timed list of
startup commands across workspaces and moves new windows by rule.
"""

__version__ = "1.0.0"
__author__ = "NixOS Configuration Team"
