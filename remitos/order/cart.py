from dataclasses import dataclass, field
from typing import Iterator, List, Optional


@dataclass
class CartLine:
    producto: str
    cantidad: float
    precio: float  # captured on first add, never re-synced with the catalog

    @property
    def subtotal(self) -> float:
        return self.cantidad * self.precio


@dataclass
class Cart:
    lines: List[CartLine] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[CartLine]:
        return iter(self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def total(self) -> float:
        return sum(line.subtotal for line in self.lines)

    def find(self, producto: str) -> Optional[CartLine]:
        for line in self.lines:
            if line.producto == producto:
                return line
        return None

    def add(self, producto: str, cantidad: float, precio: float) -> CartLine:
        line = self.find(producto)
        if line:
            line.cantidad += cantidad
            return line
        line = CartLine(producto=producto, cantidad=cantidad, precio=precio)
        self.lines.append(line)
        return line

    def remove(self, index) -> bool:
        """Drop the line at `index`. Anything that is not a valid position is ignored."""
        if isinstance(index, bool) or not isinstance(index, int):
            return False
        if index < 0 or index >= len(self.lines):
            return False
        del self.lines[index]
        return True
