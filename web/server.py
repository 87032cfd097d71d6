"""
FrontServer class for CLI control of the FastAPI application.
"""
import logging
import os
import uvicorn

from context import AppContext
from settings import PORT, LOG_LEVEL, BIND_ADDRESS, DEBUG_LOG_FILE
from .app import create_app

logger = logging.getLogger(__name__)


def setup_debug_logging(log_file: str = DEBUG_LOG_FILE) -> str:
    """Send DEBUG logs from every module to the console and an appended log file

    Returns:
        Absolute path of the debug log file
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Clear existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    log_path = os.path.abspath(log_file)
    file_handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG)

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logger.info(f"Debug logging enabled - appending to {log_path}")
    return log_path


class FrontServer:
    """Web front wrapper for CLI control"""

    def __init__(self, context: AppContext, bind_address: str = None, port: int = PORT):
        self.server = None
        self.config = None
        self.context = context
        self.bind_address = bind_address or BIND_ADDRESS
        self.port = port
        self.app = create_app(context)

    @property
    def base_url(self) -> str:
        return f"http://{self.bind_address}:{self.port}"

    def run(self):
        """Run the web front (blocking)"""
        logger.info(f"Starting Playlist Converter front on {self.base_url}")
        self.config = uvicorn.Config(
            self.app,
            host=self.bind_address,
            port=self.port,
            log_level=LOG_LEVEL,
            access_log=False  # Request timing middleware already logs
        )
        self.server = uvicorn.Server(self.config)
        self.server.run()

    def stop(self):
        """Stop the web front"""
        if self.server:
            self.server.should_exit = True
