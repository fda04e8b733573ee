from photo_clusters.core.config import configs

is_prod = configs.ENVIRONMENT == "production"

# The cluster store lives in process memory, so a single worker serves all requests.
uvicorn_settings = {
    "workers": 1,
    "backlog": 4096,
    "timeout_keep_alive": 120,
    "log_config": None,
}

if is_prod:
    uvicorn_settings.update({
        "loop": "uvloop",
        "http": "httptools",
        "access_log": True,
        "log_level": "info",
    })
