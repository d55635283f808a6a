# ==============================================================================
# TGX FORGE - MAIN ENTRY POINT
# ==============================================================================
# Launcher for the TGX Forge command-line tools.
#
# Usage:
#   python main.py --help              # Show launcher help
#   python main.py --version           # Show version
#   python main.py --check             # Check dependencies
#   python main.py encode ...          # Any tgxforge CLI command
# ==============================================================================

import sys
import traceback


# ==============================================================================
# BANNER
# ==============================================================================

def print_banner():
    """Print the application banner."""
    banner = """
    ╔═══════════════════════════════════════════════════════════╗
    ║                                                           ║
    ║    ████████╗ ██████╗ ██╗  ██╗                             ║
    ║    ╚══██╔══╝██╔════╝ ╚██╗██╔╝                             ║
    ║       ██║   ██║  ███╗ ╚███╔╝   F O R G E                  ║
    ║       ██║   ██║   ██║ ██╔██╗                              ║
    ║       ██║   ╚██████╔╝██╔╝ ██╗                             ║
    ║       ╚═╝    ╚═════╝ ╚═╝  ╚═╝                             ║
    ║                                                           ║
    ║          Stronghold GM1/TGX Image Converter               ║
    ║                     Version 1.0.0                         ║
    ║                                                           ║
    ╚═══════════════════════════════════════════════════════════╝
    """
    print(banner)


# ==============================================================================
# DEPENDENCY CHECKS
# ==============================================================================

def check_dependencies():
    """
    Check if required dependencies are installed.

    Returns:
        Tuple of (all_ok, missing_packages)
    """
    missing = []

    for module, package in (('PIL', 'Pillow'), ('numpy', 'numpy')):
        try:
            __import__(module)
        except ImportError:
            missing.append(package)

    return (len(missing) == 0, missing)


# ==============================================================================
# MAIN FUNCTION
# ==============================================================================

def main(argv=None):
    """
    Main entry point for TGX Forge.

    Handles the launcher flags itself and hands everything else to the CLI.
    """
    if argv is None:
        argv = sys.argv[1:]

    if '--version' in argv:
        from tgxforge import __version__, __description__
        print(f"TGX Forge v{__version__}")
        print(__description__)
        return 0

    if '--check' in argv:
        print("Checking dependencies...")
        print(f"  Python: {sys.version}")

        all_ok, missing = check_dependencies()
        if all_ok:
            print("[OK] All dependencies installed")
        else:
            print(f"[MISSING] {', '.join(missing)}")
        return 0 if all_ok else 1

    all_ok, missing = check_dependencies()
    if not all_ok:
        print(f"[ERROR] Missing required packages: {', '.join(missing)}")
        print(f"Install with: pip install {' '.join(missing)}")
        return 1

    if not argv or argv[0] in ('--help', '-h'):
        print_banner()

    from tgxforge.cli import main as cli_main
    try:
        return cli_main(argv)
    except KeyboardInterrupt:
        print("\n[INFO] Interrupted")
        return 130
    except Exception as e:
        print(f"\n[FATAL ERROR] {e}")
        traceback.print_exc()
        return 1


# ==============================================================================
# SCRIPT ENTRY POINT
# ==============================================================================
if __name__ == "__main__":
    exit_code = main()
    sys.exit(exit_code)
