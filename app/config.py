import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_ITERATIONS = int(os.getenv("DEFAULT_ITERATIONS", 500))
# Upper bound on simulated weeks per trial; only reached when weekly throughput
# can never be positive (e.g. all historical samples are 0).
MAX_SIMULATED_WEEKS = int(os.getenv("MAX_SIMULATED_WEEKS", 520))

# Uploaded backlogs are handed from POST /api/slices to the next page load
# through an in-memory store. Entries live 30 minutes, swept every 5 minutes.
HANDOFF_TTL_SECONDS = float(os.getenv("HANDOFF_TTL_SECONDS", 30 * 60))
HANDOFF_SWEEP_INTERVAL_SECONDS = float(os.getenv("HANDOFF_SWEEP_INTERVAL_SECONDS", 5 * 60))

# Comma separated list, "*" allows any origin (the upload endpoint is called
# cross-origin by the backlog tool).
CORS_ALLOW_ORIGINS = [o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
