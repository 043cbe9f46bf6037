"""taskmind: task list with AI breakdown and day planning."""
