from . import (
    admin as admin,
    auth as auth,
    bookings as bookings,
    community as community,
    health as health,
    newsletter as newsletter,
    payments as payments,
    reviews as reviews,
    trainers as trainers,
    users as users,
)
