#!/usr/bin/env python3
"""
PowerCell Startup Script
Launches the API server, Celery worker and Celery beat.
"""
import os
import sys
import subprocess
import time
import signal
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from powercell.core.config import settings


class PowerCellLauncher:
    """Launcher for PowerCell application components."""

    def __init__(self):
        self.processes = []
        self.running = True

    def _spawn(self, name, cmd):
        process = subprocess.Popen(cmd, text=True)
        self.processes.append((name, process))
        print(f"Started {name} (pid {process.pid})")

    def start_api_server(self):
        cmd = [
            sys.executable, "-m", "uvicorn",
            "powercell.main:app",
            "--host", "0.0.0.0",
            "--port", "8000",
        ]
        cmd += ["--reload"] if settings.debug else ["--workers", "4"]
        self._spawn("API Server", cmd)

    def start_celery_worker(self):
        self._spawn("Celery Worker", [
            sys.executable, "-m", "celery",
            "-A", "powercell.worker.celery",
            "worker",
            "--loglevel=info",
            "--concurrency=2"
        ])

    def start_celery_beat(self):
        self._spawn("Celery Beat", [
            sys.executable, "-m", "celery",
            "-A", "powercell.worker.celery",
            "beat",
            "--loglevel=info"
        ])

    def check_dependencies(self):
        if not os.path.exists(".env"):
            print(".env file not found, using default settings")
        return True

    def signal_handler(self, signum, frame):
        print("\nShutting down PowerCell...")
        self.running = False

    def shutdown(self):
        """Shutdown all processes."""
        for name, process in self.processes:
            try:
                process.terminate()
                process.wait(timeout=5)
                print(f"{name} stopped")
            except subprocess.TimeoutExpired:
                process.kill()
                print(f"{name} force killed")

    def run(self):
        self.check_dependencies()

        signal.signal(signal.SIGINT, self.signal_handler)
        signal.signal(signal.SIGTERM, self.signal_handler)

        try:
            self.start_api_server()
            time.sleep(2)
            self.start_celery_worker()
            self.start_celery_beat()

            print("\nPowerCell is running")
            print("API: http://localhost:8000  Health: http://localhost:8000/health")
            print("Press Ctrl+C to stop all services")

            while self.running:
                for name, process in self.processes:
                    if process.poll() is not None:
                        print(f"{name} stopped unexpectedly")
                        self.running = False
                time.sleep(1)
        finally:
            self.shutdown()


if __name__ == "__main__":
    PowerCellLauncher().run()
