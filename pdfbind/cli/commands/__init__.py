"""Sub-command definitions for the pdfbind CLI."""
