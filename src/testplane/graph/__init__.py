"""Build-graph models, workspace lookups and the targets memoization store."""
