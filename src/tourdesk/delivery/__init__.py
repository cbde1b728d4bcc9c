"""Media delivery pipeline: naming, validation, upload and deletion."""
