import os

import uvicorn
from dotenv import load_dotenv

from ekraf_admin.logging_config import configure_logging
from ekraf_admin.sandbox import create_app

load_dotenv()

configure_logging(verbose=os.environ.get("SANDBOX_DEBUG") == "1")

# Seeded with demo accounts: admin@ekraf.test / admin123 on the "admin" level
app = create_app(seed=os.environ.get("SANDBOX_SEED", "1") != "0")


if __name__ == "__main__":
    # Point the client at it with EKRAF_API_BASE_URL=http://localhost:8000/api
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", 8000)))
