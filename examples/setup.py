# examples/setup.py
"""
Simple script that validates if all the dependencies are installed and imports the main module.
"""


def handle_deps():
    from fastapi import FastAPI
    from pydantic import BaseModel
    from rich.console import Console
    from sqlalchemy.ext.asyncio import create_async_engine


def handle_querychain():
    from querychain import querychain_init

    querychain_init()


if __name__ == "__main__":
    handle_deps()
    handle_querychain()
