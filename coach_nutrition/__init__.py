"""Energy expenditure and macro allocation for the coaching platform."""
