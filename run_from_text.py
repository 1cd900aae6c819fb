# run_from_text.py

import argparse
import asyncio

from mathdoc.app_logic import generate_excel_document, generate_word_document
from mathdoc.config import load_settings
from mathdoc.errors import MathDocError


def main():
    """
    Builds a .docx (text with inline $...$ math) or .xlsx (JSON rows) from a
    file of already-extracted AI output.
    """
    parser = argparse.ArgumentParser(description="Convert extracted math text into Word or Excel.")
    parser.add_argument("input", help="Text file (docx mode) or JSON file (excel mode).")
    parser.add_argument("-o", "--output", help="Output file name (extension optional).")
    parser.add_argument("--format", choices=["docx", "excel"], default="docx")
    args = parser.parse_args()

    settings = load_settings()

    print(f"📄 Reading '{args.input}'...")
    try:
        with open(args.input, 'r', encoding='utf-8') as f:
            content = f.read()
    except OSError as e:
        print(f"Error: cannot read input file -> {e}")
        return 1

    try:
        if args.format == "excel":
            file_bytes, file_name = generate_excel_document(content, args.output, settings=settings)
        else:
            file_bytes, file_name, _ = asyncio.run(
                generate_word_document(content, args.output, settings=settings, logger=print)
            )
    except MathDocError as e:
        print(f"❌ Generation failed: {e}")
        return 1

    with open(file_name, 'wb') as f:
        f.write(file_bytes)
    print(f"🎉 Saved '{file_name}'.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
