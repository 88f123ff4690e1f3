"""Argument types shared by the client and server command lines"""
import argparse

from meteo.config import check_port, check_timeout
from meteo.exceptions import ConfigurationError


def port_type(text: str) -> int:
    try:
        return check_port(text)
    except ConfigurationError as e:
        raise argparse.ArgumentTypeError(e.message)


def timeout_type(text: str) -> float:
    try:
        return check_timeout(text)
    except ConfigurationError as e:
        raise argparse.ArgumentTypeError(e.message)
