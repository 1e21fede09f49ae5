"""BranchUser: the slice of a user account the reporting core needs."""


class BranchUser:
    def __init__(self, id: int, username: str, branch_name: str = "", role: str = ""):
        self.id = id
        self.username = username
        self.branch_name = branch_name
        self.role = role

    def __repr__(self) -> str:
        return f"BranchUser(id={self.id}, username={self.username!r})"

    def to_dict(self):
        return {"id": self.id, "username": self.username, "branch_name": self.branch_name}
