"""Composable authorized actions."""

from gatekeep.action._action import Action, start

__all__ = ["Action", "start"]
