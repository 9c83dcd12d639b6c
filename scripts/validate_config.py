#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import List

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from lotsize_app.catalog.instruments import list_instruments
from lotsize_app.config.loader import ConfigLoader
from lotsize_app.config.validation import ConfigValidator, ValidationError


def validate_instrument_config(loader: ConfigLoader, symbol: str) -> List[ValidationError]:
    """Validate the merged configuration for one instrument."""
    config = loader.merge_config(symbol)
    return ConfigValidator.validate_config(config)


def main():
    """Main validation function."""
    config_dir = sys.argv[1] if len(sys.argv) > 1 else None
    loader = ConfigLoader.create(config_dir)
    print(f"Validating configuration in {loader.config_dir}...")

    all_valid = True

    for instrument in list_instruments():
        errors = validate_instrument_config(loader, instrument.symbol)
        if errors:
            print(f"\n{instrument.symbol}: {len(errors)} validation errors")
            for error in errors:
                print(f"  - {error.field}: {error.message} (value: {error.value})")
            all_valid = False

    print("\nEffective catalog:")
    for instrument in loader.load_catalog():
        print(f"  {instrument.symbol:<12} {instrument.category.value:<14} "
              f"{instrument.quote_currency}  {instrument.default_contract_size:g}")

    if all_valid:
        print("\nAll configurations are valid")
        return 0

    print("\nSome configurations have errors")
    return 1


if __name__ == "__main__":
    sys.exit(main())
