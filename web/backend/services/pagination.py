import math
from typing import Any, Dict


def pagination(page: int, per_page: int, total: int) -> Dict[str, Any]:
    return {
        'page': page,
        'per_page': per_page,
        'total': total,
        'total_pages': math.ceil(total / per_page) if per_page else 0,
    }
