from .markdown import cost_to_dict, cost_to_markdown, diff_to_markdown, diff_to_price_diff

__all__ = [
    "cost_to_dict",
    "cost_to_markdown",
    "diff_to_markdown",
    "diff_to_price_diff",
]
