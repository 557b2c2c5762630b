class GistBackupError(Exception):
    pass


class MissingCredential(GistBackupError):
    def __init__(self, key: str):
        super().__init__(
            f"no token given, pass --token or set one with "
            f"`git config --global {key} <TOKEN>`"
        )
        self.key = key


class MissingTarget(GistBackupError):
    def __init__(self):
        super().__init__("give a backup directory or an archive path")


class InvalidCloneUrl(GistBackupError):
    def __init__(self, url: str, reason: str):
        super().__init__(f"invalid clone url {url!r}: {reason}")
        self.url = url


class ListingError(GistBackupError):
    pass
