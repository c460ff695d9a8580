"""
Schoolflow package for the SchoolRadar CLI.

SchoolRadar asks a generative text model to invent a plausible list of
fictional schools near a street address, turns the reply into
validated records and exports them as CSV.  Nothing is persisted and
the data is explicitly fictional.

The high-level flow is:

1. **config** - Resolve provider, API key and search options once from
   a YAML file and the environment.
2. **search** - Build the prompt and call the model provider
   (Gemini, OpenAI or an offline placeholder).
3. **normalize** - Strip code fences, repair stray characters, parse
   the JSON reply and validate each school into a `SchoolRecord`;
   render records as CSV.
4. **session** - Keep the current address, records and error for one
   search-and-export interaction.
5. **cli** - Command line entry point wiring together the above
   components.
"""

from importlib import metadata

try:
    __version__ = metadata.version("schoolradar")
except metadata.PackageNotFoundError:  # running from a source checkout
    __version__ = "0.0.0"
