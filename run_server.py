#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Rubi - 启动服务
"""

import os
import signal
import socket
import subprocess
import sys

import uvicorn

from common.config import settings


def port_in_use(port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        return s.connect_ex(("127.0.0.1", port)) == 0


def free_port(port: int) -> None:
    """结束占用端口的旧进程（通常是上次没退出的开发服务）"""
    if not port_in_use(port):
        return

    print(f"端口 {port} 被占用，正在释放...")

    if sys.platform == "win32":
        cmd = f"netstat -ano | findstr :{port}"
    else:
        cmd = f"lsof -ti :{port}"

    try:
        out = subprocess.check_output(cmd, shell=True, text=True)
    except subprocess.CalledProcessError:
        return

    pids = set()
    for line in out.strip().splitlines():
        parts = line.split()
        if sys.platform == "win32":
            if "LISTENING" in parts:
                pids.add(int(parts[-1]))
        elif parts:
            pids.add(int(parts[0]))

    for pid in pids - {os.getpid()}:
        print(f"  结束进程 PID={pid}")
        if sys.platform == "win32":
            subprocess.run(f"taskkill /F /PID {pid}", shell=True, capture_output=True)
        else:
            os.kill(pid, signal.SIGKILL)

    print(f"端口 {port} 已释放")


if __name__ == "__main__":
    free_port(settings.port)

    print("=" * 50)
    print("Rubi API")
    print(f"服务地址: http://localhost:{settings.port}")
    print("=" * 50)

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="info",
    )
