from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from fastapi import FastAPI

# ✅ Create a limiter instance; endpoints that call paid Maps APIs opt in with @limiter.limit
limiter = Limiter(
    key_func=get_remote_address,
    auto_check=True
)


def register_rate_limiting(app: FastAPI) -> None:
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
