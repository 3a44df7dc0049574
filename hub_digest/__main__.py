import asyncio
import logging
import os
import sys

from hub_digest.arguments import Parser
from hub_digest.server import amain


def main() -> None:
    parser = Parser(
        config_files=[os.getenv("HUB_DIGEST_CONFIG", "~/.config/hub-digest/config.ini")],
        auto_env_var_prefix="HUB_DIGEST_",
    )
    parser.parse_args()

    logging.basicConfig(level=parser.log_level, format="[%(levelname)s] %(message)s", stream=sys.stderr)
    try:
        exit_code = asyncio.run(amain(parser))
    except KeyboardInterrupt:
        logging.info("Gracefully exited on keyboard interrupt")
        exit_code = 130
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
