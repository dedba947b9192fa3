"""Network selection and client settings."""
