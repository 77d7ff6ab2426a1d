"""matte_app: command-line front end for matte_core."""
