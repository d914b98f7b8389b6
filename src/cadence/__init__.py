"""Cadence - recurrence and access-window engine for a personal tracker."""
