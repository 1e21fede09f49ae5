"""Network helpers used when announcing the service on startup."""
import socket

LOOPBACK = "127.0.0.1"


def get_local_ip() -> str:
    """Return the LAN address the OS would route outbound traffic through.

    Connecting a UDP socket sends nothing; it only makes the kernel pick a
    source interface. Falls back to the loopback address when offline.
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.connect(("8.8.8.8", 80))
        return str(sock.getsockname()[0])
    except OSError:
        return LOOPBACK
    finally:
        sock.close()


def service_urls(port: int) -> list[str]:
    """URLs under which the API is reachable: localhost first, then the LAN address if any."""
    urls = [f"http://localhost:{port}"]
    ip = get_local_ip()
    if ip != LOOPBACK:
        urls.append(f"http://{ip}:{port}")
    return urls
