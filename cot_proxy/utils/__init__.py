def format_destination(host: str, port: int) -> str:
    return f"{host}:{port}"
