"""
Static content of the public site.
"""

SERVICE_CATEGORIES = {
    'correctivo': {
        'title': 'Mantenimiento Correctivo',
        'description': (
            'Servicios enfocados en reparar averías o fallos cuando ocurren, minimizando así '
            'el tiempo de inactividad de sus equipos. Respuesta rápida para emergencias.'
        ),
    },
    'preventivo': {
        'title': 'Mantenimiento Preventivo',
        'description': (
            'Consiste en realizar inspecciones regulares y tareas de mantenimiento programadas '
            'para garantizar que los equipos funcionen correctamente y evitar fallos futuros.'
        ),
    },
}

CONTACT = {
    'address': 'Calle Ficticia 123, Col. Centro, Mérida, Yucatán, México',
    'phone': '(999) 123-4567',
    'email': 'contacto@sticgsa.com',
    'hours': [
        'Lunes a Viernes: 9:00 AM - 6:00 PM',
        'Sábados: 9:00 AM - 1:00 PM',
    ],
    'emergency': 'Servicio de emergencia 24/7 disponible.',
}

FAQS = [
    {
        'question': '¿Cómo puedo levantar un nuevo ticket de servicio?',
        'answer': (
            'Puedes levantar un nuevo ticket navegando a la sección "Crear Ticket" desde el menú '
            'de tu perfil o el pie de página. Deberás llenar detalles sobre el tipo de servicio, '
            'el equipo, una descripción del problema y el nivel de urgencia. Una vez enviado, '
            'nuestro equipo lo revisará a la brevedad.'
        ),
    },
    {
        'question': '¿Cuáles son los tiempos de respuesta?',
        'answer': (
            'Los tiempos de respuesta varían según la prioridad de tu ticket. Los tickets de alta '
            'prioridad se atienden típicamente en 1-2 horas, los de prioridad media en 4-6 horas '
            'y los de baja prioridad en 24 horas.'
        ),
    },
    {
        'question': '¿Cómo puedo revisar el estado de mi ticket?',
        'answer': (
            'Una vez que hayas iniciado sesión, visita "Mis Tickets" para ver todos tus tickets '
            'enviados y su estado actual (Recibido, En Progreso, Resuelto).'
        ),
    },
    {
        'question': '¿Qué tipos de equipos de cocina reparan?',
        'answer': (
            'Damos servicio a una amplia gama de equipos de cocina industrial y comercial, '
            'incluyendo estufas, hornos, freidoras, campanas de extracción, refrigeradores y '
            'congeladores. Trabajamos con las principales marcas del mercado.'
        ),
    },
    {
        'question': '¿Cómo solicito una cotización para un servicio específico?',
        'answer': (
            'Puedes solicitar una cotización visitando la página "Solicitar Cotización". '
            'Proporciona la mayor cantidad de detalles posible sobre tus necesidades para que '
            'podamos darte un estimado preciso.'
        ),
    },
    {
        'question': '¿Ofrecen servicios de reparación de emergencia?',
        'answer': (
            'Sí, ofrecemos servicios de reparación de emergencia 24/7 para problemas críticos. '
            'Marca tu ticket como de urgencia "Alta" o llama a nuestra línea directa.'
        ),
    },
]

# Admin navigation: (endpoint, label)
ADMIN_SECTIONS = [
    ('dashboard', 'Dashboard'),
    ('projects', 'Proyectos'),
    ('quotes', 'Cotizaciones'),
    ('clients', 'Clientes'),
    ('services', 'Servicios'),
    ('purchase-orders', 'Órdenes de Compra'),
    ('suppliers', 'Proveedores'),
    ('spare-parts', 'Refacciones'),
    ('tickets', 'Tickets de Servicio'),
    ('reports', 'Reportes'),
    ('users', 'Control de Usuarios'),
]
