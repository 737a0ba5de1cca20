from __future__ import annotations

import pytest
from pytest import approx

from biome.sim.core.capabilities import can_hunt, can_reproduce
from biome.sim.core.organism import (
    Animal,
    DeathCause,
    Microorganism,
    OrganismKind,
    Plant,
)


def _plant(energy: float = 30.0, age: int = 0, size: float = 5.0, rate: float = 4.0) -> Plant:
    return Plant(energy=energy, age=age, size=size, photosynthesis_rate=rate)


def _animal(energy: float = 100.0, age: int = 0, size: float = 10.0, metabolism: float = 1.2, speed: float = 10.0) -> Animal:
    return Animal(energy=energy, age=age, size=size, metabolism_rate=metabolism, speed=speed)


def _microbe(energy: float = 10.0, age: int = 0, size: float = 0.1, rate: float = 0.3) -> Microorganism:
    return Microorganism(energy=energy, age=age, size=size, decomposition_rate=rate)


def test_organisms_use_slots_and_compare_by_identity():
    first = _plant()
    second = _plant()

    assert not hasattr(first, "__dict__")
    assert first != second
    assert first == first
    assert len({first, second}) == 2
    assert first.id == -1
    assert first.alive


@pytest.mark.parametrize("field_name", ["energy", "age", "size"])
def test_negative_construction_is_rejected(field_name):
    values = {"energy": 10.0, "age": 0, "size": 1.0}
    values[field_name] = -1
    with pytest.raises(ValueError, match=field_name):
        Plant(photosynthesis_rate=1.0, **values)


@pytest.mark.parametrize("prior, amount", [(10.0, 4.0), (10.0, 10.0), (10.0, 25.0), (3.5, 0.0)])
def test_be_eaten_drains_at_most_current_energy(prior, amount):
    animal = _animal(energy=prior)

    taken = animal.be_eaten(amount)

    assert taken == approx(min(prior, amount))
    assert animal.energy == approx(prior - taken)
    assert animal.energy >= 0
    assert animal.alive == (animal.energy > 0)


def test_be_eaten_to_zero_kills_and_later_callers_get_nothing():
    plant = _plant(energy=6.0)

    assert plant.be_eaten(6.0) == approx(6.0)
    assert not plant.alive
    assert plant.death is not None
    assert plant.death.cause is DeathCause.CONSUMED
    assert plant.be_eaten(5.0) == 0.0
    assert plant.energy == 0.0


def test_be_eaten_ignores_negative_amounts():
    plant = _plant(energy=6.0)

    assert plant.be_eaten(-3.0) == 0.0
    assert plant.energy == approx(6.0)
    assert plant.alive


def test_die_is_idempotent():
    animal = _animal(age=12, size=3.0)

    assert animal.die(DeathCause.OLD_AGE) is True
    record = animal.death
    assert animal.die(DeathCause.STARVATION) is False

    assert not animal.alive
    assert animal.death is record
    assert record.kind is OrganismKind.ANIMAL
    assert record.age == 12
    assert record.size == approx(3.0)
    assert record.cause is DeathCause.OLD_AGE


def test_plant_update_photosynthesises_and_grows():
    plant = _plant(energy=30.0, size=5.0, rate=4.0)

    plant.update()

    assert plant.age == 1
    assert plant.size == approx(5.1)
    assert plant.energy == approx(30.0 + 4.0 - 0.5 - 0.5)


def test_plant_stops_growing_at_max_size():
    plant = _plant(energy=30.0, size=15.0, rate=4.0)

    plant.update()

    assert plant.size == approx(15.0)
    assert plant.energy == approx(30.0 + 4.0 - 1.5)


def test_plant_dies_of_old_age_without_growing():
    plant = _plant(energy=30.0, age=50, size=5.0, rate=4.0)

    plant.update()

    assert not plant.alive
    assert plant.death.cause is DeathCause.OLD_AGE
    assert plant.size == approx(5.0)
    assert plant.energy == approx(33.5)


def test_plant_starvation_clamps_energy():
    plant = _plant(energy=0.2, size=5.0, rate=0.0)

    plant.update()

    assert not plant.alive
    assert plant.energy == 0.0
    assert plant.death.cause is DeathCause.STARVATION


def test_plant_growth_cost_can_starve_it():
    plant = _plant(energy=0.4, size=1.0, rate=0.0)

    plant.update()

    assert not plant.alive
    assert plant.energy == 0.0


def test_dead_organisms_do_not_update():
    plant = _plant()
    plant.die()

    plant.update()

    assert plant.age == 0
    assert plant.energy == approx(30.0)


def test_plant_reproduction():
    plant = _plant(energy=25.0, age=6, size=5.0, rate=4.0)

    child = plant.reproduce()

    assert plant.energy == approx(5.0)
    assert isinstance(child, Plant)
    assert child.energy == approx(10.0)
    assert child.age == 0
    assert child.size == approx(1.0)
    assert child.photosynthesis_rate == approx(4.0)
    assert child.alive


@pytest.mark.parametrize("energy, age", [(20.0, 6), (25.0, 5)])
def test_plant_reproduction_thresholds(energy, age):
    plant = _plant(energy=energy, age=age)

    assert plant.reproduce() is None
    assert plant.energy == approx(energy)


def test_animal_update_burns_metabolism():
    animal = _animal(energy=100.0, size=10.0, metabolism=1.2)

    animal.update()

    assert animal.age == 1
    assert animal.energy == approx(88.0)
    assert animal.alive


def test_animal_dies_of_old_age():
    animal = _animal(energy=100.0, age=70, size=1.0, metabolism=1.0)

    animal.update()

    assert not animal.alive
    assert animal.death.cause is DeathCause.OLD_AGE
    assert animal.energy == approx(99.0)


def test_faster_hunter_drains_prey_completely():
    hunter = _animal(energy=100.0, speed=15.0)
    prey = _animal(energy=40.0, speed=10.0)

    assert hunter.hunt(prey) is True

    assert prey.energy == 0.0
    assert not prey.alive
    assert prey.death.cause is DeathCause.CONSUMED
    assert hunter.energy == approx(100.0 + 32.0)


@pytest.mark.parametrize("prey_speed", [15.0, 10.0])
def test_slower_or_equal_hunter_pays_for_failed_chase(prey_speed):
    hunter = _animal(energy=100.0, speed=10.0)
    prey = _animal(energy=40.0, speed=prey_speed)

    assert hunter.hunt(prey) is False

    assert hunter.energy == approx(95.0)
    assert prey.energy == approx(40.0)
    assert prey.alive


def test_failed_chase_can_starve_the_hunter():
    hunter = _animal(energy=3.0, speed=1.0)
    prey = _animal(energy=40.0, speed=10.0)

    hunter.hunt(prey)

    assert hunter.energy == 0.0
    assert not hunter.alive


def test_hunting_non_animals_has_no_effect():
    hunter = _animal(energy=100.0, speed=15.0)
    plant = _plant(energy=30.0)

    assert hunter.hunt(plant) is False

    assert hunter.energy == approx(100.0)
    assert plant.energy == approx(30.0)


def test_hunt_with_dead_party_is_a_no_op():
    hunter = _animal(energy=100.0, speed=15.0)
    prey = _animal(energy=40.0, speed=10.0)
    prey.die()

    assert hunter.hunt(prey) is False
    assert hunter.energy == approx(100.0)
    assert prey.energy == approx(40.0)


def test_graze_takes_half_of_drained_energy():
    animal = _animal(energy=50.0)
    plant = _plant(energy=30.0, size=5.0)

    drained = animal.graze(plant)

    assert drained == approx(25.0)
    assert plant.energy == approx(5.0)
    assert animal.energy == approx(62.5)


def test_graze_is_capped_by_plant_energy():
    animal = _animal(energy=50.0)
    plant = _plant(energy=4.0, size=5.0)

    drained = animal.graze(plant)

    assert drained == approx(4.0)
    assert not plant.alive
    assert animal.energy == approx(52.0)


def test_animal_reproduction():
    animal = _animal(energy=60.0, age=11, metabolism=1.5, speed=12.0)

    child = animal.reproduce()

    assert animal.energy == approx(10.0)
    assert isinstance(child, Animal)
    assert child.energy == approx(30.0)
    assert child.age == 0
    assert child.size == approx(2.0)
    assert child.metabolism_rate == approx(1.5)
    assert child.speed == approx(12.0)


@pytest.mark.parametrize("energy, age", [(50.0, 11), (60.0, 10)])
def test_animal_reproduction_thresholds(energy, age):
    assert _animal(energy=energy, age=age).reproduce() is None


def test_microorganism_decomposes_share_of_corpse():
    corpse = _animal(energy=10.0)
    corpse.die()
    microbe = _microbe(energy=10.0, rate=0.3)

    drained = microbe.decompose(corpse)

    assert drained == approx(3.0)
    assert corpse.energy == approx(7.0)
    assert microbe.energy == approx(13.0)


def test_microorganism_ignores_living_and_spent_organisms():
    microbe = _microbe(energy=10.0)
    living = _plant(energy=30.0)
    spent = _plant(energy=1.0)
    spent.be_eaten(1.0)

    assert microbe.decompose(living) == 0.0
    assert microbe.decompose(spent) == 0.0
    assert living.energy == approx(30.0)
    assert microbe.energy == approx(10.0)


def test_microorganism_update_checks_energy_and_age_independently():
    microbe = _microbe(energy=0.1, age=100)

    microbe.update()

    assert not microbe.alive
    assert microbe.energy == 0.0
    assert microbe.death.cause is DeathCause.STARVATION


def test_microorganism_dies_of_old_age():
    microbe = _microbe(energy=10.0, age=100)

    microbe.update()

    assert not microbe.alive
    assert microbe.death.cause is DeathCause.OLD_AGE
    assert microbe.energy == approx(9.8)


def test_microorganism_reproduction_has_no_age_gate():
    microbe = _microbe(energy=6.0, age=0, rate=0.4)

    child = microbe.reproduce()

    assert microbe.energy == approx(1.0)
    assert isinstance(child, Microorganism)
    assert child.energy == approx(2.0)
    assert child.size == approx(0.1)
    assert child.decomposition_rate == approx(0.4)
    assert _microbe(energy=5.0).reproduce() is None


def test_dead_organisms_do_not_reproduce():
    plant = _plant(energy=40.0, age=10)
    plant.die()

    assert plant.reproduce() is None
    assert plant.energy == approx(40.0)


def test_capabilities():
    assert can_reproduce(_plant())
    assert can_reproduce(_animal())
    assert can_reproduce(_microbe())
    assert can_hunt(_animal())
    assert not can_hunt(_plant())
    assert not can_hunt(_microbe())
