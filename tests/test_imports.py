"""
Test that all modules can be imported correctly
Run this after installing dependencies to validate the setup
"""
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def test_core_imports():
    """Test core module imports"""
    print("Testing core imports...")
    from meteo.config import settings
    from meteo.models import WeatherRequest, WeatherResponse, Status
    from meteo.engine.codec import encode_request, decode_response
    from meteo.engine.validator import RequestValidator
    from meteo.engine.server import WeatherServer
    assert settings.server_port > 0
    print("✓ Core imports successful")


def test_cli_imports():
    """Test CLI module imports"""
    print("Testing CLI imports...")
    from meteo_cli import arguments, client, server

    assert callable(client.main)
    assert callable(server.main)
    assert callable(arguments.port_type)
    print("✓ CLI imports successful")


def test_request_round_trip():
    """Test a request through the server handler"""
    print("Testing request handling...")
    from meteo.engine.codec import decode_response, encode_request
    from meteo.engine.request_handler import RequestHandler
    from meteo.models import Status

    handled = RequestHandler().handle(encode_request("p", "palermo"))
    response = decode_response(handled.payload)
    assert response.status == Status.SUCCESS
    print(f"  Pressure in palermo: {response.value:.1f} hPa")
    print("✓ Request handling successful")


if __name__ == "__main__":
    print("\n" + "=" * 60)
    print("Meteo - Import and Integration Tests")
    print("=" * 60 + "\n")

    try:
        test_core_imports()
        print()

        test_cli_imports()
        print()

        test_request_round_trip()
        print()

        print("=" * 60)
        print("✓ ALL TESTS PASSED")
        print("=" * 60)
        print("\nNext steps:")
        print("  1. Start the server: meteo-server -p 56700")
        print("  2. Query it: meteo-client -s localhost -r \"t roma\"")

    except ImportError as e:
        print(f"\n✗ Import Error: {e}")
        print("\nPlease install dependencies first:")
        print("  pip install -e .[test]")
        sys.exit(1)
    except Exception as e:
        print(f"\n✗ Test Failed: {e}")
        import traceback

        traceback.print_exc()
        sys.exit(1)
