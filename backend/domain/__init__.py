"""Domain layer per l'analisi delle immagini di cibo.

Questo package implementa la logica di business (classificazione, percorsi
di evidenza, calcolo dei macronutrienti, riconciliazione delle calorie),
disaccoppiata dall'API HTTP e dall'infrastruttura.
"""
