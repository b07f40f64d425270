"""
🎯 WalletRepository - Almacén en memoria de wallets y comentarios

Las wallets se guardan en orden de inserción (el desempate del ranking
depende de ese orden). Todo lo que sale del repositorio es una copia:
nadie fuera de los servicios puede mutar el estado compartido.
"""

from typing import Optional

from arena.models.wallet import Comment, Wallet


class WalletRepository:
    def __init__(self):
        self._wallets: dict[str, Wallet] = {}
        self._comments: dict[str, list[Comment]] = {}

    # ============================================
    # 📌 CREATE
    # ============================================

    def create(self, wallet: Wallet) -> Wallet:
        """Guarda una wallet nueva (la dirección ya viene normalizada)"""
        if wallet.address in self._wallets:
            raise ValueError(f"Wallet {wallet.address} already exists")

        self._wallets[wallet.address] = wallet.model_copy(deep=True)
        self._comments[wallet.address] = []
        return wallet.model_copy(deep=True)

    # ============================================
    # 📌 READ
    # ============================================

    def get(self, address: str) -> Optional[Wallet]:
        """Obtiene una copia de la wallet, o None"""
        wallet = self._wallets.get(address)
        return wallet.model_copy(deep=True) if wallet else None

    def exists(self, address: str) -> bool:
        return address in self._wallets

    def list_all(self) -> list[Wallet]:
        """Copias de todas las wallets, en orden de inserción"""
        return [w.model_copy(deep=True) for w in self._wallets.values()]

    def addresses(self) -> list[str]:
        return list(self._wallets.keys())

    def count(self) -> int:
        return len(self._wallets)

    # ============================================
    # 📌 UPDATE
    # ============================================

    def update(self, address: str, **fields) -> Optional[Wallet]:
        """Actualiza campos de una wallet y devuelve la copia resultante"""
        wallet = self._wallets.get(address)
        if wallet is None:
            return None

        updated = wallet.model_copy(update=fields, deep=True)
        self._wallets[address] = updated
        return updated.model_copy(deep=True)

    def toggle_follower(self, address: str, follower: str) -> Optional[tuple[bool, int]]:
        """
        Alterna el follow de `follower` sobre `address`.

        Retorna (is_following, followers_count), o None si la wallet no existe.
        """
        wallet = self._wallets.get(address)
        if wallet is None:
            return None

        if follower in wallet.followers:
            wallet.followers.discard(follower)
            is_following = False
        else:
            wallet.followers.add(follower)
            is_following = True

        return is_following, len(wallet.followers)

    # ============================================
    # 📌 COMMENTS
    # ============================================

    def add_comment(self, address: str, comment: Comment) -> Optional[Comment]:
        wallet = self._wallets.get(address)
        if wallet is None:
            return None

        self._comments[address].append(comment.model_copy())
        wallet.comment_count = len(self._comments[address])
        return comment.model_copy()

    def get_comments(self, address: str, offset: int = 0, limit: int = 20) -> list[Comment]:
        """Comentarios en orden de inserción, paginados"""
        comments = self._comments.get(address, [])
        return [c.model_copy() for c in comments[offset:offset + limit]]

    def count_comments(self, address: str) -> int:
        return len(self._comments.get(address, []))
