"""Core Layer - error hierarchy shared by every layer, no IO."""
