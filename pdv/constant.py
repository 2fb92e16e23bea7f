"""Editable static catalog configuration."""

from __future__ import annotations

# Option categories map onto the bundle slots of a build-your-own cup.
OPTION_CATEGORY_SLOTS: dict[str, str] = {
    "Frutas": "frutas",
    "Cremes": "cremes",
    "Acompanhamentos": "acompanhamentos",
}

PAYMENT_METHOD_LABELS: dict[str, str] = {
    "CREDIT": "Crédito",
    "DEBIT": "Débito",
    "CASH": "Dinheiro",
    "PIX": "PIX",
}

# (id, name, price, category, type)
INITIAL_PRODUCT_ROWS: list[tuple[int, str, float, str, str]] = [
    (1, "Tapioca", 4.5, "Sorvetes", "unit"),
    (2, "Oreo", 4.5, "Sorvetes", "unit"),
    (3, "Chocolate", 4.5, "Sorvetes", "unit"),
    (4, "Morango", 4.5, "Sorvetes", "unit"),
    (5, "Creme com Passas", 4.5, "Sorvetes", "unit"),
    (6, "Creme com Brownie", 4.5, "Sorvetes", "unit"),
    (7, "Serenata", 4.5, "Sorvetes", "unit"),
    (8, "Ferreiro Rocher", 4.5, "Sorvetes", "unit"),
    (9, "Ninho com Nutella", 4.5, "Sorvetes", "unit"),
    (10, "Algodão Doce", 4.5, "Sorvetes", "unit"),
    (11, "Abacaxi ao Vinho", 4.5, "Sorvetes", "unit"),
    (12, "Kinder Bueno", 4.5, "Sorvetes", "unit"),
    (13, "Menta", 4.5, "Sorvetes", "unit"),
    (14, "Ovomaltine", 4.5, "Sorvetes", "unit"),
    (15, "Milkshake Chocolate 300ml", 10.0, "Milkshakes", "unit"),
    (16, "Milkshake Chocolate 500ml", 13.0, "Milkshakes", "unit"),
    (17, "Milkshake Morango 300ml", 10.0, "Milkshakes", "unit"),
    (18, "Milkshake Morango 500ml", 13.0, "Milkshakes", "unit"),
    (19, "Milkshake Ovomaltine 300ml", 11.0, "Milkshakes Premium", "unit"),
    (20, "Milkshake Ovomaltine 500ml", 15.0, "Milkshakes Premium", "unit"),
    (21, "Milkshake Oreo 300ml", 11.0, "Milkshakes Premium", "unit"),
    (22, "Milkshake Oreo 500ml", 15.0, "Milkshakes Premium", "unit"),
    (23, "Milkshake Nutella 300ml", 11.0, "Milkshakes Premium", "unit"),
    (24, "Milkshake Nutella 500ml", 15.0, "Milkshakes Premium", "unit"),
    (25, "Açaí/Sorvete no Peso", 47.0, "Açaí", "weight"),
    (26, "Monte do Seu Jeito 200ml", 12.0, "Monte do Seu Jeito", "unit"),
    (27, "Monte do Seu Jeito 300ml", 15.0, "Monte do Seu Jeito", "unit"),
    (28, "Monte do Seu Jeito 500ml", 18.0, "Monte do Seu Jeito", "unit"),
    (29, "Açaí", 0.0, "Cremes", "option"),
    (30, "Açaí zero açúcar", 0.0, "Cremes", "option"),
    (31, "Cupuaçu", 0.0, "Cremes", "option"),
    (32, "Ninho (cobertura)", 0.0, "Cremes", "option"),
    (33, "Ninho (sorvete)", 0.0, "Cremes", "option"),
    (34, "Ovomaltine", 0.0, "Cremes", "option"),
    (35, "Amendoim", 0.0, "Cremes", "option"),
    (36, "Banana", 0.0, "Frutas", "option"),
    (37, "Uva", 0.0, "Frutas", "option"),
    (38, "Kiwi", 0.0, "Frutas", "option"),
    (39, "Granulado de chocolate", 0.0, "Acompanhamentos", "option"),
    (40, "Granulado colorido", 0.0, "Acompanhamentos", "option"),
    (41, "Jujuba", 0.0, "Acompanhamentos", "option"),
    (42, "Disquete", 0.0, "Acompanhamentos", "option"),
    (43, "Flocos de arroz", 0.0, "Acompanhamentos", "option"),
    (44, "Creme de avelã", 0.0, "Acompanhamentos", "option"),
    (45, "Leite condensado", 0.0, "Acompanhamentos", "option"),
    (46, "Ovomaltine", 0.0, "Acompanhamentos", "option"),
    (47, "Canudo wafer", 0.0, "Acompanhamentos", "option"),
    (48, "Paçoquinha triturada", 0.0, "Acompanhamentos", "option"),
    (49, "Castanha", 0.0, "Acompanhamentos", "option"),
    (50, "Granola", 0.0, "Acompanhamentos", "option"),
    (51, "Amendoim", 0.0, "Acompanhamentos", "option"),
    (52, "Amendoim torrado", 0.0, "Acompanhamentos", "option"),
    (53, "Paçoquinha (INTEIRA)", 0.0, "Acompanhamentos", "option"),
    (54, "Farinha de aveia", 0.0, "Acompanhamentos", "option"),
    (55, "Oreo triturado", 0.0, "Acompanhamentos", "option"),
    (56, "Leite em pó", 0.0, "Acompanhamentos", "option"),
    (57, "Farinha láctea", 0.0, "Acompanhamentos", "option"),
    (58, "Mashmallows", 0.0, "Acompanhamentos", "option"),
    (59, "Chocoball", 0.0, "Acompanhamentos", "option"),
    (60, "Chocoball branco", 0.0, "Acompanhamentos", "option"),
    (61, "Chocopower", 0.0, "Acompanhamentos", "option"),
    (62, "Cereja", 0.0, "Acompanhamentos", "option"),
    (63, "Coco ralado", 0.0, "Acompanhamentos", "option"),
    (64, "Gotas de choco. Preto", 0.0, "Acompanhamentos", "option"),
    (65, "Gotas de choco. Branco", 0.0, "Acompanhamentos", "option"),
    (66, "Fini beijos", 0.0, "Acompanhamentos", "option"),
    (67, "Fini bananinhas", 0.0, "Acompanhamentos", "option"),
    (68, "Fini dentadura", 0.0, "Acompanhamentos", "option"),
    (69, "Creme de Cookies", 3.0, "Adicionais", "addon"),
    (70, "Nutella", 3.0, "Adicionais", "addon"),
    (71, "Morango", 2.5, "Adicionais", "addon"),
    (72, "Banana", 1.0, "Adicionais", "addon"),
    (73, "Uva", 2.0, "Adicionais", "addon"),
    (74, "Kiwi", 2.0, "Adicionais", "addon"),
]

# id -> (frutas, cremes, acompanhamentos)
BUNDLE_LIMITS_BY_ID: dict[int, tuple[int, int, int]] = {
    26: (1, 2, 3),
    27: (2, 2, 4),
    28: (3, 2, 5),
}
