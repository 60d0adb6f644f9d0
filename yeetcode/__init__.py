"""Discord Interactions webhook that answers commands with a random LeetCode problem."""
