from .functions import (
    _cholesky_pd,
    asset_names_of,
    check_dimensions,
    portfolio_return,
    portfolio_variance,
)
