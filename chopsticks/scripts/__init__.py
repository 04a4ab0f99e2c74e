"""Command line scripts: play a single game and evaluate agents."""
