"""Symbols Previewer: preview symbol images inside a reelhouse grid."""
