"""Seed definitions for a fresh canteen (single source of truth for scripts/seed_canteen.py)."""

PLACEHOLDER_IMAGE = 'https://via.placeholder.com/400x200?text=No+Image'

_RICE_IMG = 'https://images.unsplash.com/photo-1603133872878-684f208fb84b?w=400'
_KOTTU_IMG = 'https://images.unsplash.com/photo-1565557623262-b51c2513a641?w=400'

# name, description, price, category, preparation minutes
MENU_ITEMS = [
    ('Chicken Rice', 'Aromatic rice served with tender chicken pieces and special sauce', '350', 'Rice', 15, _RICE_IMG),
    ('Vegetable Fried Rice', 'Wok-fried rice with fresh vegetables and soy sauce', '280', 'Rice', 12, _RICE_IMG),
    ('Chicken Kottu', 'Shredded roti stir-fried with chicken, vegetables, and spices', '400', 'Kottu', 18, _KOTTU_IMG),
    ('Cheese Kottu', 'Classic kottu topped with melted cheese', '450', 'Kottu', 20, _KOTTU_IMG),
    ('Chicken Burger', 'Crispy chicken patty with lettuce, tomato, and special sauce', '320', 'Burgers', 10, None),
    ('Beef Burger', 'Juicy beef patty with cheese, pickles, and classic toppings', '380', 'Burgers', 12, None),
    ('Fish & Chips', 'Crispy battered fish fillets with golden fries', '420', 'Seafood', 15, None),
    ('Chicken Submarine', 'Long bread roll filled with spicy chicken, veggies, and sauce', '350', 'Submarines', 8, None),
    ('Vegetable Submarine', 'Fresh vegetables with cheese in a toasted sub roll', '280', 'Submarines', 7, None),
    ('Fresh Orange Juice', 'Freshly squeezed orange juice', '150', 'Beverages', 5, None),
    ('Mango Smoothie', 'Creamy smoothie made with fresh mangoes', '180', 'Beverages', 5, None),
    ('Chocolate Cake Slice', 'Rich chocolate cake with chocolate frosting', '200', 'Desserts', 2, None),
    ('Ice Cream Sundae', 'Vanilla ice cream with chocolate sauce and toppings', '220', 'Desserts', 3, None),
    ('French Fries', 'Crispy golden French fries with ketchup', '150', 'Snacks', 8, None),
    ('Chicken Wings', 'Spicy chicken wings with dipping sauce', '350', 'Snacks', 12, None),
]

ADMIN_ACCOUNT = {'name': 'Admin User', 'email': 'admin@canteen.com', 'password': 'admin123'}

# Staff start with the counters they had when the roster was migrated
STAFF_ACCOUNTS = [
    {'name': 'John Cook', 'email': 'john@canteen.com', 'password': 'staff123', 'orders_completed': 45, 'rating': 4.5},
    {'name': 'Sarah Helper', 'email': 'sarah@canteen.com', 'password': 'staff123', 'orders_completed': 38, 'rating': 4.8},
]

SHOP_LOCATION = {
    'name': 'SUSL Main Canteen',
    'address': 'Sabaragamuwa University of Sri Lanka, Belihuloya',
    'lat': 6.7106,
    'lng': 80.7846,
    'phone': '+94 45 2280014',
    'open_hours': '7:00 AM - 8:00 PM',
}
