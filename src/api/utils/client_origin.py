from fastapi import Request


def get_client_origin(request: Request) -> str:
    """
    Best-effort network origin of the caller.

    Prefers the first X-Forwarded-For hop, then X-Real-IP, then the socket
    peer. Headers are client-controlled unless a trusted proxy sets them.
    """
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first_hop = forwarded_for.split(",")[0].strip()
        if first_hop:
            return first_hop

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()

    if request.client and request.client.host:
        return request.client.host

    return "unknown"
