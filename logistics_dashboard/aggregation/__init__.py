"""
Aggregation layer — grouped totals, rankings, monthly cumulative series
and summary scalars computed from parsed records.
"""
