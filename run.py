from pathlib import Path
import sys

def ensure_src_on_path():
    project_root = Path(__file__).resolve().parent
    src_dir = project_root / "src"
    if str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))

# Run the loader CLI straight from a checkout, without installing the package
def main() -> int:
    ensure_src_on_path()
    from sqlloader.cli import main as cli_main
    return cli_main()

if __name__ == "__main__":
    raise SystemExit(main())
