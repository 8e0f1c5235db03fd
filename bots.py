from payload import Actor

BOT_ACCOUNT_TYPE = "Bot"
BOT_LOGIN_SUFFIX = "[bot]"


def is_automated(actor: Actor) -> bool:
    """True for GitHub App / bot accounts: type "Bot" or a login ending in "[bot]"."""
    return actor.type == BOT_ACCOUNT_TYPE or actor.login.endswith(BOT_LOGIN_SUFFIX)
