from .schema import schema_node
from .statistics import statistics_node
from .charts import chart_data_node

__all__ = [
    "schema_node",
    "statistics_node",
    "chart_data_node",
]
