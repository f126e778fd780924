"""Display styles: colors and text formatting."""
