"""Services used by the sambalxc installation workflow."""
